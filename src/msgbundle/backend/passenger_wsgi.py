"""WSGI entrypoint for serving the msgbundle API behind Passenger."""

from msgbundle.backend.app import create_app

# Passenger expects a module-level variable named ``application``.
application = create_app()
