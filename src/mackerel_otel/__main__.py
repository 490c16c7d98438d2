from mackerel_otel.cli import app

app(prog_name="mackerel-otel")
