"""
FastAPI entrypoint for the project-controls dashboard.

One process-wide AppStateController holds the file set, mode and current
report; the routes below are the dashboard's actions:
- choose a mode, upload / remove documents, trigger an analysis
- read the current state for rendering
- theme and profile preferences
"""

import logging
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from . import config

# Configure logging
logging.basicConfig(
    level=config.log_level(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

from fastapi import Depends, FastAPI, File, Form, HTTPException, UploadFile
from typing import List

from .intake import IntakeError, parse_file_type, read_upload
from .preferences import Preferences, PreferencesState, PreferenceStore, ThemeUpdate, UserProfile
from .request_builder import MODE_CATALOG
from .schemas import AnalyzeResponse, DashboardState, FileSummary, ModeInfo, ModeUpdate
from .state import AppStateController

app = FastAPI(title="PMIS Control Pipeline")

_controller = AppStateController()
_preferences = Preferences(PreferenceStore(config.preferences_path()))


def get_controller() -> AppStateController:
    return _controller


def get_preferences() -> Preferences:
    return _preferences


@app.get("/modes", response_model=List[ModeInfo])
async def list_modes():
    return list(MODE_CATALOG.values())


@app.get("/state", response_model=DashboardState)
async def get_state(controller: AppStateController = Depends(get_controller)):
    return controller.snapshot()


@app.put("/mode", response_model=DashboardState)
async def set_mode(update: ModeUpdate, controller: AppStateController = Depends(get_controller)):
    controller.set_mode(update.mode)
    return controller.snapshot()


@app.post("/files", response_model=FileSummary)
async def upload_file(
    file_type: str = Form(...),
    file: UploadFile = File(...),
    controller: AppStateController = Depends(get_controller),
):
    try:
        declared_type = parse_file_type(file_type)
        project_file = await read_upload(file, declared_type)
    except IntakeError as e:
        logger.warning(f"Upload rejected: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    controller.add_or_replace(project_file)
    return FileSummary.from_file(project_file)


@app.delete("/files/{file_id}", response_model=DashboardState)
async def remove_file(file_id: str, controller: AppStateController = Depends(get_controller)):
    if not controller.remove(file_id):
        raise HTTPException(status_code=404, detail=f"No file with id {file_id}")
    return controller.snapshot()


@app.post("/analyze", response_model=AnalyzeResponse)
async def analyze_endpoint(controller: AppStateController = Depends(get_controller)):
    if controller.is_analyzing:
        raise HTTPException(status_code=409, detail="An analysis is already running.")

    # No files (or dashboard mode): nothing to analyze, not an error
    result = await controller.run_analysis()
    if result is None:
        return AnalyzeResponse(started=False, result=controller.result)
    return AnalyzeResponse(started=True, result=result)


@app.get("/preferences", response_model=PreferencesState)
async def get_preferences_state(preferences: Preferences = Depends(get_preferences)):
    return preferences.snapshot()


@app.put("/preferences/theme", response_model=PreferencesState)
async def set_theme(update: ThemeUpdate, preferences: Preferences = Depends(get_preferences)):
    preferences.set_theme(update.theme)
    return preferences.snapshot()


@app.put("/preferences/profile", response_model=PreferencesState)
async def set_profile(profile: UserProfile, preferences: Preferences = Depends(get_preferences)):
    preferences.update_profile(profile)
    return preferences.snapshot()
