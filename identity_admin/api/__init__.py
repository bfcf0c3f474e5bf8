"""HTTP layer: Flask blueprints, auth decorator and error handlers."""
