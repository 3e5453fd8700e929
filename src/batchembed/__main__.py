from batchembed.cli import app

app()
