from confirm.cli import app

app(prog_name="confirm")
