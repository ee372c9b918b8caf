from roi_taskflow.cli import main

main()
