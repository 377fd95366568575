import os

# Application
wsgi_app = "app.factory:create_app()"

# Bind & workers
bind = os.getenv("GUNICORN_BIND", "0.0.0.0:8000")
workers = int(os.getenv("GUNICORN_WORKERS", "2"))
threads = int(os.getenv("GUNICORN_THREADS", "1"))
timeout = 90  # media uploads go through the worker
graceful_timeout = 30
keepalive = 5

# Logs to stdout/stderr; app records are already JSON lines
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()

# Trust proxy headers; ProxyFix handles the app side when USE_PROXYFIX is set
forwarded_allow_ips = "*"
proxy_protocol = False
