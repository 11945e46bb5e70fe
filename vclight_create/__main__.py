from vclight_create.cli import main

main()
