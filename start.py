#!/usr/bin/env python3
"""
Forms Portal Backend Startup Script
Handles graceful startup with error diagnostics
"""

import os
import sys
import logging
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

def check_environment():
    """Check if all required environment variables are set"""
    required_vars = [
        "DATABASE_URL",
    ]

    missing_vars = [var for var in required_vars if not os.getenv(var)]

    if missing_vars:
        logger.error(f"❌ Missing environment variables: {missing_vars}")
        return False

    logger.info("✅ All required environment variables are set")
    return True

def check_database_connection():
    """Test database connectivity before starting the server"""
    from config import get_settings
    from database import Database

    logger.info("🔍 Testing database connection...")
    database = Database.from_settings(get_settings())
    try:
        if database.test_connection():
            logger.info("✅ Database connection successful")
        else:
            logger.info("⚠️ Continuing anyway - will try to connect during runtime")
    finally:
        database.dispose()

def start_server():
    """Start the FastAPI server"""
    try:
        import uvicorn
        from config import get_settings

        settings = get_settings()

        logger.info(f"🚀 Starting Forms Portal Backend on {settings.HOST}:{settings.PORT}")

        uvicorn.run(
            "main:app",
            host=settings.HOST,
            port=settings.PORT,
            log_level=settings.LOG_LEVEL.lower()
        )

    except Exception as e:
        logger.error(f"❌ Failed to start server: {e}")
        sys.exit(1)

def main():
    """Main startup function"""
    logger.info("📝 Forms Portal Backend - Starting Up...")

    # Check environment
    if not check_environment():
        logger.error("❌ Environment check failed")
        sys.exit(1)

    # Check database
    check_database_connection()

    # Start server
    start_server()

if __name__ == "__main__":
    main()
