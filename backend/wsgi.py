# backend/wsgi.py
from winehouse import create_app

app = create_app()
