from permit2_swap.commands.permit2_swap import main

main()
