# module techfest.app
from techfest.app_setup.factory import create_app

# App globale
app = create_app()
