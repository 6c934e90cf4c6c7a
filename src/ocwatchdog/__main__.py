from ocwatchdog.cli import main

main()
