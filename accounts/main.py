from .core.app_factory import create_application

app = create_application()
