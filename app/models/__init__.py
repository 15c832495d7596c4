# Importujemy wszystkie modele tutaj zeby Base.metadata je widzial
from app.models.base import Base
from app.models.suite_run import SuiteRun, SuiteRunStatus
from app.models.run import ScenarioRun, RunStatus
