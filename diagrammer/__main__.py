from diagrammer.cli import app

app()
