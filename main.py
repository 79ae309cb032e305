"""
main.py

Package fastgallery
"""

from fastgallery.main import app


if __name__ == '__main__':
    app()
