from remsync.cli import main

main()
