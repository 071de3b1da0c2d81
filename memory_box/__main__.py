from memory_box.main import main

main()
