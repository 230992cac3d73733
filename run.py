#!/usr/bin/env python
"""
ExamFlex Result API - Application Entry Point

Usage:
    python run.py [--host HOST] [--port PORT] [--reload]
    python run.py hash-password SECRET

Examples:
    python run.py                    # Start with defaults
    python run.py --reload           # Start with auto-reload
    python run.py --port 8080        # Start on custom port
    python run.py hash-password s3cr3t   # Hash for API_CLIENTS
"""
import argparse
import sys
import uvicorn


def hash_password_command(argv):
    """Print an Argon2 hash to put into API_CLIENTS"""
    from examflex.services.auth_service import hash_password

    parser = argparse.ArgumentParser(prog="run.py hash-password")
    parser.add_argument("password", help="Client password to hash")
    args = parser.parse_args(argv)
    print(hash_password(args.password))


def main():
    if len(sys.argv) > 1 and sys.argv[1] == "hash-password":
        hash_password_command(sys.argv[2:])
        return

    parser = argparse.ArgumentParser(
        description="ExamFlex Result API Server"
    )
    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host to bind (default: 127.0.0.1)"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to bind (default: 8000)"
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development"
    )

    args = parser.parse_args()

    print(f"""
╔══════════════════════════════════════════════════════════════╗
                  ExamFlex Result API Server
╠══════════════════════════════════════════════════════════════╣
    Host: {args.host:<15}
    Port: {args.port:<15}
    Reload: {'Enabled' if args.reload else 'Disabled':<12}
╠══════════════════════════════════════════════════════════════╣
    API Docs: http://{args.host}:{args.port}/docs
    ReDoc:    http://{args.host}:{args.port}/redoc
╚══════════════════════════════════════════════════════════════╝
    """)

    uvicorn.run(
        "examflex.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level="info"
    )


if __name__ == "__main__":
    main()
