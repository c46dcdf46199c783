from form_gateway.main import run

run()
