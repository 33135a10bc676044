#!/usr/bin/env python3
"""
Startup script for the Worker Data Relay.
Runs the FastAPI relay locally under uvicorn.
"""

import sys
import argparse


def run_app(host='127.0.0.1', port=8788, reload=False, log_level='info'):
    """Run the relay under uvicorn."""
    import uvicorn

    print(f"🚀 Starting Worker Data Relay on http://{host}:{port}/api/worker-data")
    print("   Press Ctrl+C to stop the server")

    try:
        uvicorn.run("relay_fastapi:app", host=host, port=port, reload=reload, log_level=log_level)
    except KeyboardInterrupt:
        print("\n👋 Server stopped by user")
    except Exception as e:
        print(f"❌ Error starting server: {e}")
        return False

    return True


def main():
    """Main function to handle command line arguments."""
    parser = argparse.ArgumentParser(
        description='Worker Data Relay',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run.py                    # Run on 127.0.0.1:8788
  python run.py --reload           # Restart on code changes
  python run.py --host 0.0.0.0     # Listen on all interfaces
  python run.py --port 8080        # Run on port 8080
        """
    )

    parser.add_argument('--host', default='127.0.0.1',
                       help='Host to bind to (default: 127.0.0.1)')
    parser.add_argument('--port', type=int, default=8788,
                       help='Port to bind to (default: 8788)')
    parser.add_argument('--reload', action='store_true',
                       help='Reload on code changes')
    parser.add_argument('--log-level', default='info',
                       choices=['critical', 'error', 'warning', 'info', 'debug'],
                       help='uvicorn log level (default: info)')

    args = parser.parse_args()

    if not run_app(host=args.host, port=args.port, reload=args.reload, log_level=args.log_level):
        sys.exit(1)


if __name__ == '__main__':
    main()
