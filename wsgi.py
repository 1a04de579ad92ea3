from fleetbook import create_app

app = create_app()
