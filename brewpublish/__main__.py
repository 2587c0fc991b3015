from brewpublish.cli.app import main

main()
