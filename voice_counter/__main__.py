from voice_counter.main import main

main()
