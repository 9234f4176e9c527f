from netlist_backanno.cli import app

if __name__ == "__main__":
    app()
