# main.py

from typescan.main import main

if __name__ == '__main__':
    # Allows running `python main.py scan <folder>` straight from a checkout.
    main()
