"""Run the name tree service: python -m nametree"""

from nametree.main import main

if __name__ == "__main__":
    main()
