#!/usr/bin/env python3
"""
gpgaze - Gaussian Process gaze estimation server

Run with: python run.py
Socket.IO clients connect to: http://localhost:3226
"""

from gpgaze.main import main

if __name__ == "__main__":
    main()
