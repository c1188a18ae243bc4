# wsgi.py - Entry point for production deployment
import os
import sys

# Add current directory to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

# Importing main creates the tables on SQLite and arms the midnight rollover
from main import app

if __name__ == "__main__":
    port = int(os.getenv('PORT', 5000))
    app.run(host='0.0.0.0', port=port)
