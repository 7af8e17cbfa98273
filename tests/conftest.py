from tests.fixtures.app_fixtures import client, local_storage, settings  # noqa: F401
from tests.fixtures.aws_fixtures import (  # noqa: F401
    aws_credentials,
    mocked_aws,
    s3_app_client,
    s3_client,
    s3_settings,
    s3_storage,
)
