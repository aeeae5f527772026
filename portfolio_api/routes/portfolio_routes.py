from fastapi import APIRouter, Depends

from portfolio_api.auth.dependencies import get_current_claims, get_portfolio_store
from portfolio_api.models.portfolio import DEFAULT_PREFERENCES, ProfileUpdateRequest, ProjectRequest
from portfolio_api.services.portfolio_store import PortfolioStore

router = APIRouter(tags=['portfolio'])


@router.get('/portfolio')
def get_portfolio(store: PortfolioStore = Depends(get_portfolio_store)):
    return store.get_document()


@router.get('/portfolio/profile')
def get_profile(store: PortfolioStore = Depends(get_portfolio_store)):
    return store.get_profile()


@router.get('/portfolio/skills')
def get_skills(store: PortfolioStore = Depends(get_portfolio_store)):
    return store.get_skills()


@router.get('/portfolio/projects')
def list_projects(store: PortfolioStore = Depends(get_portfolio_store)):
    return store.list_projects()


@router.get('/portfolio/projects/{project_id}')
def get_project(project_id: int, store: PortfolioStore = Depends(get_portfolio_store)):
    return store.get_project(project_id)


@router.get('/portfolio/social')
def get_social_links(store: PortfolioStore = Depends(get_portfolio_store)):
    return store.get_social_links()


@router.get('/preferences')
def get_preferences():
    return dict(DEFAULT_PREFERENCES)


@router.patch('/portfolio/profile', dependencies=[Depends(get_current_claims)])
def update_profile(data: ProfileUpdateRequest, store: PortfolioStore = Depends(get_portfolio_store)):
    profile = store.update_profile(data.model_dump(exclude_unset=True, by_alias=True))
    return {'message': 'Profile updated successfully', 'profile': profile}


@router.put('/portfolio/projects/{project_id}', dependencies=[Depends(get_current_claims)])
def replace_project(
    project_id: int,
    data: ProjectRequest,
    store: PortfolioStore = Depends(get_portfolio_store),
):
    project = store.replace_project(project_id, data.title, data.description, data.tech)
    return {'message': 'Project updated successfully', 'project': project}


@router.patch('/portfolio/projects/{project_id}', dependencies=[Depends(get_current_claims)])
def update_project(
    project_id: int,
    data: ProjectRequest,
    store: PortfolioStore = Depends(get_portfolio_store),
):
    project = store.update_project(project_id, data.model_dump(exclude_unset=True))
    return {'message': 'Project updated successfully', 'project': project}


@router.delete('/portfolio/projects/{project_id}', dependencies=[Depends(get_current_claims)])
def delete_project(project_id: int, store: PortfolioStore = Depends(get_portfolio_store)):
    project = store.delete_project(project_id)
    return {'message': 'Project deleted successfully', 'project': project}
