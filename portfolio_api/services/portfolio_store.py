import copy
from threading import RLock

from portfolio_api.core.errors import NotFoundError, ValidationError
from portfolio_api.models.portfolio import DEFAULT_PORTFOLIO, PROFILE_FIELDS, normalize_tech


class PortfolioStore:
    """Holds the portfolio document in memory.

    Readers get deep copies so a response can never alias the live document.
    """

    def __init__(self, document: dict | None = None):
        self._document = copy.deepcopy(document or DEFAULT_PORTFOLIO)
        self._lock = RLock()

    def _read(self, *keys):
        with self._lock:
            value = self._document
            for key in keys:
                value = value[key]
            return copy.deepcopy(value)

    def get_document(self) -> dict:
        return self._read()

    def get_profile(self) -> dict:
        return self._read('profile')

    def get_skills(self) -> list[str]:
        return self._read('skills')

    def list_projects(self) -> list[dict]:
        return self._read('projects')

    def get_social_links(self) -> dict:
        return self._read('socialLinks')

    def _find_project(self, project_id: int) -> dict:
        for project in self._document['projects']:
            if project['id'] == project_id:
                return project
        raise NotFoundError('Project not found')

    def get_project(self, project_id: int) -> dict:
        with self._lock:
            return copy.deepcopy(self._find_project(project_id))

    def update_profile(self, updates: dict) -> dict:
        with self._lock:
            profile = self._document['profile']
            for field in PROFILE_FIELDS:
                if field in updates:
                    profile[field] = updates[field]
            return copy.deepcopy(profile)

    def replace_project(self, project_id: int, title: str | None, description: str | None, tech) -> dict:
        if not title or not description or not tech:
            raise ValidationError('Title, description, and tech are required')

        with self._lock:
            projects = self._document['projects']
            index = projects.index(self._find_project(project_id))
            projects[index] = {
                'id': project_id,
                'title': title,
                'description': description,
                'tech': normalize_tech(tech),
            }
            return copy.deepcopy(projects[index])

    def update_project(self, project_id: int, updates: dict) -> dict:
        with self._lock:
            project = self._find_project(project_id)
            if 'title' in updates:
                project['title'] = updates['title']
            if 'description' in updates:
                project['description'] = updates['description']
            if 'tech' in updates:
                project['tech'] = normalize_tech(updates['tech'])
            return copy.deepcopy(project)

    def delete_project(self, project_id: int) -> dict:
        with self._lock:
            project = self._find_project(project_id)
            self._document['projects'].remove(project)
            return project
