from ibllut.cli import main

main()
