from essai_cp.main_gui import main

if __name__ == "__main__":
    main()
