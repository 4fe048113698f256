from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import os
import logging
from dotenv import load_dotenv

from db import create_db_engine, init_db
from course_search.routes import current_cycle_year, router as course_search_router

load_dotenv()

logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
logging.info("App starting with DATABASE_URL")

engine = create_db_engine()
init_db(engine)

# Raises on a malformed CURRENT_RECRUITMENT_CYCLE_YEAR
logging.info(f"Current recruitment cycle: {current_cycle_year() or 'all'}")

app = FastAPI(title="Teacher training course search")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)

app.include_router(course_search_router)
