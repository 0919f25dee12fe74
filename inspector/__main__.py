from inspector.main import run

run()
