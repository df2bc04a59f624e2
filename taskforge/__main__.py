from taskforge.pipeline import main

main()
