from modules.cli.main import app

app()
