#!/usr/bin/env python3
"""
Run the CAP codec development server.

Environment:
    CAP_HOST       bind address (default 127.0.0.1)
    CAP_PORT       port (default 5000)
    CAP_DEBUG      "1" to enable the Flask debugger
    CAP_LOG_LEVEL  logging level (default INFO)
"""

import logging
import os
import sys

# add src to path
sys.path.insert(0, os.path.dirname(__file__))

from src.web import create_app

if __name__ == '__main__':
    logging.basicConfig(
        level=os.environ.get('CAP_LOG_LEVEL', 'INFO').upper(),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )
    app = create_app()
    app.run(
        debug=os.environ.get('CAP_DEBUG') == '1',
        host=os.environ.get('CAP_HOST', '127.0.0.1'),
        port=int(os.environ.get('CAP_PORT', '5000')),
    )
