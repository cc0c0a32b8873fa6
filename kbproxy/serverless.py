"""Serverless entry point.

Function-as-a-service platforms with WSGI support import ``app`` (or its
alias ``handler``) from this module. The application is built by the same
``create_app`` factory as the standalone server.
"""

from dotenv import load_dotenv

from kbproxy.app import create_app

load_dotenv()

app = create_app()
handler = app
