from drf_spectacular.extensions import OpenApiAuthenticationExtension


class SessionJWTAuthenticationScheme(OpenApiAuthenticationExtension):
    target_class = "clinic_core.iam.auth.SessionJWTAuthentication"
    name = "SessionBearer"

    def get_security_definition(self, auto_schema):
        return {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT",
            "description": (
                "Send the access_token returned by /login/ as `Authorization: Bearer <token>`. "
                "Logging out revokes every token of the user."
            ),
        }
