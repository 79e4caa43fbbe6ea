from schemasupport.cli import main

main()
