"""HTML pages and the RSS feed."""

import fastapi
import fastapi.responses
import fastapi.templating

import common.app
import common.settings

from .. import feed, posts, urls

router = fastapi.APIRouter()

HOME_POST_COUNT = 5


def _templates(request: fastapi.Request) -> fastapi.templating.Jinja2Templates:
    return request.app.state.templates


@router.get('/', response_class=fastapi.responses.HTMLResponse)
async def index(
    request: fastapi.Request,
    settings: common.settings.Settings = fastapi.Depends(common.app.get_settings),
) -> fastapi.responses.HTMLResponse:
    """Render the home page with the latest posts."""
    published = await posts.load_posts(settings.posts_dir)
    return _templates(request).TemplateResponse(
        request=request,
        name='index.html.jinja2',
        context={
            'posts': published[:HOME_POST_COUNT],
            'origin': urls.get_origin(request, settings),
        },
    )


@router.get('/blog', response_class=fastapi.responses.HTMLResponse)
async def blog(
    request: fastapi.Request,
    settings: common.settings.Settings = fastapi.Depends(common.app.get_settings),
) -> fastapi.responses.HTMLResponse:
    """Render the blog listing of all published posts."""
    published = await posts.load_posts(settings.posts_dir)
    return _templates(request).TemplateResponse(
        request=request,
        name='blog.html.jinja2',
        context={'posts': published, 'origin': urls.get_origin(request, settings)},
    )


@router.get('/blog/{post_id}', response_class=fastapi.responses.HTMLResponse)
async def post(
    request: fastapi.Request,
    post_id: str,
    settings: common.settings.Settings = fastapi.Depends(common.app.get_settings),
) -> fastapi.responses.HTMLResponse:
    """Render an individual blog post by id."""
    matched = await posts.get_post(settings.posts_dir, post_id)
    if matched is None:
        raise fastapi.HTTPException(status_code=404, detail='Post not found')
    return _templates(request).TemplateResponse(
        request=request,
        name='post.html.jinja2',
        context={'post': matched, 'origin': urls.get_origin(request, settings)},
    )


@router.get('/rss.xml')
async def rss(
    request: fastapi.Request,
    settings: common.settings.Settings = fastapi.Depends(common.app.get_settings),
) -> fastapi.responses.Response:
    """Render and serve the RSS feed."""
    published = await posts.load_posts(settings.posts_dir)
    items = feed.build_feed_items(published, settings.site_url)
    xml = (
        _templates(request)
        .get_template('rss.xml.jinja2')
        .render(  # type: ignore
            items=items,
            title=settings.site_title,
            description=settings.site_description,
            site_url=settings.site_url,
        )
    )
    return fastapi.responses.Response(content=xml, media_type='application/rss+xml')
