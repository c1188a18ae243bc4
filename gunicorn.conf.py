# gunicorn.conf.py

bind = "0.0.0.0:5000"
worker_class = "sync"
# Each worker imports main and arms its own midnight rollover: keep one.
workers = 1
timeout = 120
keepalive = 2
preload_app = False
