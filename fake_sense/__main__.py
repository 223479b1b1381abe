from fake_sense.cli import main

main()
