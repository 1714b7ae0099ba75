import logging

from fastapi import FastAPI

from napcast.config import get_settings
from napcast.database import Base, engine
from napcast.routes import profile, sessions, schedule

settings = get_settings()
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Create database tables
Base.metadata.create_all(bind=engine)

# Create FastAPI app
app = FastAPI(
    title="Napcast API",
    description="Learns an infant's sleep rhythm from logged sessions and projects naps, wind-downs and bedtime",
    version="1.0.0"
)

# Include routers
app.include_router(profile.router, prefix="/profile", tags=["profile"])
app.include_router(sessions.router, prefix="/sessions", tags=["sessions"])
app.include_router(schedule.router, prefix="/schedule", tags=["schedule"])

@app.get("/")
def read_root():
    """Root endpoint with API information"""
    return {
        "message": "Welcome to Napcast API",
        "version": "1.0.0",
        "timezone": settings.timezone_name,
        "endpoints": {
            "profile": "GET/PUT /profile/ - Baby profile (birth date drives the age baseline)",
            "sessions": "CRUD /sessions/* - Sleep sessions (deletes are soft)",
            "schedule": "GET /schedule/ - Learner state, projected blocks, coaching tips and reminders",
            "learner": "GET /schedule/learner - Recompute the learner state only",
        },
        "swagger_ui": "/docs - Interactive API documentation",
        "redoc": "/redoc - Alternative API documentation"
    }

@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "message": "API is running"}

# This allows running the app directly with: python -m napcast.main
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("napcast.main:app", host="0.0.0.0", port=8000, reload=True)
