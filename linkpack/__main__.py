from linkpack.cli import main

main()
