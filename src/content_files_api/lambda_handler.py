"""Lambda handler for Content Files API using Mangum."""
from mangum import Mangum
from content_files_api.config.settings import get_settings
from content_files_api.logging_config import configure_logging
from content_files_api.main import create_app

settings = get_settings()
configure_logging(settings.log_level)

# Create FastAPI app
app = create_app(settings)

# Wrap with Mangum for Lambda compatibility
handler = Mangum(app, lifespan="off")

# Export handler for Lambda runtime
lambda_handler = handler
