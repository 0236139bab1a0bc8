from keyrelay.main import run

run()
