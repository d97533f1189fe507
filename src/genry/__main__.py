from genry.cli import app

app(prog_name="genry")
