from shelf.cli.app import main

main()
