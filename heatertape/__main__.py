from heatertape.cli import cli

cli()
