from bigmath.benchmark.cli import main

main()
