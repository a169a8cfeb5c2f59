from projignore.cli import main

main()
