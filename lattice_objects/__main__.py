from lattice_objects.cli import main

main()
