import logging

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from portfolio_api.core import config
from portfolio_api.core.errors import InternalError, PortfolioAPIError
from portfolio_api.routes import auth_routes, portfolio_routes
from portfolio_api.services.auth_service import AuthService
from portfolio_api.services.portfolio_store import PortfolioStore
from portfolio_api.services.user_store import UserStore

logger = logging.getLogger(__name__)

ENDPOINTS = {
    'auth': {
        'register': 'POST /api/auth/register',
        'login': 'POST /api/auth/login',
        'me': 'GET /api/auth/me (protected)',
        'verify': 'POST /api/auth/verify (protected)',
        'initAdmin': 'POST /api/auth/init-admin (dev only)',
        'profile': 'PUT /api/auth/profile (protected)',
        'password': 'PATCH /api/auth/password (protected)',
        'account': 'DELETE /api/auth/account (protected)',
    },
    'portfolio': {
        'all': '/api/portfolio',
        'profile': '/api/portfolio/profile',
        'skills': '/api/portfolio/skills',
        'projects': '/api/portfolio/projects',
        'projectById': '/api/portfolio/projects/:id',
        'social': '/api/portfolio/social',
        'preferences': '/api/preferences',
    },
}


async def handle_api_error(request: Request, exc: PortfolioAPIError) -> JSONResponse:
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error('%s %s failed: %s', request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={'error': exc.message})


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info('Rejected malformed request to %s: %s', request.url.path, exc.errors())
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={'error': 'Invalid request body'})


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception('Unhandled error on %s %s', request.method, request.url.path)
    return await handle_api_error(request, InternalError())


def create_app(
    user_store: UserStore | None = None,
    portfolio_store: PortfolioStore | None = None,
) -> FastAPI:
    config.validate_runtime_config()

    app = FastAPI(title='Portfolio API')

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ALLOW_ORIGINS,
        allow_credentials=config.CORS_ALLOW_ORIGINS != ['*'],
        allow_methods=['*'],
        allow_headers=['*'],
    )

    app.state.user_store = user_store or UserStore()
    app.state.auth_service = AuthService(app.state.user_store)
    app.state.portfolio_store = portfolio_store or PortfolioStore()

    app.add_exception_handler(PortfolioAPIError, handle_api_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    @app.get('/')
    def root():
        return {
            'message': 'Portfolio API is running',
            'health': '/api/health',
            'endpoints': ENDPOINTS,
        }

    @app.get('/api/health')
    def health():
        return {'status': 'OK', 'message': 'Server is running'}

    app.include_router(auth_routes.router, prefix='/api/auth')
    app.include_router(portfolio_routes.router, prefix='/api')
    return app


app = create_app()


def run() -> None:
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s',
    )
    logger.info('Server is running on http://%s:%s', config.HOST, config.PORT)
    uvicorn.run(app, host=config.HOST, port=config.PORT)


if __name__ == '__main__':
    run()
