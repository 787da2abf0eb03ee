"""
Cognito construct for the Todo Lists Service.

Creates the identity subsystem:
1. User pool - email sign-in, self sign-up, password policy, email recovery
2. App client - enabled auth flows, token lifetimes, OAuth code grant
3. Identity pool - exchanges user pool tokens for temporary AWS credentials
4. Authenticated role - assumed by identities the identity pool has validated

The authenticated role starts with no permissions. The stack grants it
access to the HTTP API once the API exists (see grant_invoke_api).

Follows steering rules:
- Infrastructure definition only (no business logic)
- Explicit over implicit (all configurations declared)
- Least privilege IAM permissions
"""

from typing import List, Optional

from aws_cdk import (
    aws_apigatewayv2 as apigwv2,
    aws_cognito as cognito,
    aws_iam as iam,
    Duration,
)
from constructs import Construct


IDENTITY_SERVICE = 'cognito-identity.amazonaws.com'


class TodoListsAuthConstruct(Construct):
    """
    Construct that creates Cognito resources for the Todo Lists Service.

    Attributes:
        user_pool: Cognito user pool (credential directory)
        user_pool_client: App client used by the front end and the authorizer
        identity_pool: Cognito identity pool (federated identity exchange)
        authenticated_role: IAM role assumed by authenticated identities
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        user_pool_name: str,
        identity_pool_name: str,
        callback_urls: List[str],
        ses_from_email: Optional[str] = None,
        ses_region: Optional[str] = None,
        **kwargs
    ) -> None:
        """
        Initialize the auth construct.

        Args:
            scope: CDK construct scope
            construct_id: Unique construct identifier
            user_pool_name: Name of the Cognito user pool
            identity_pool_name: Name of the Cognito identity pool
            callback_urls: OAuth authorization-code callback URLs
            ses_from_email: SES sender address (Cognito default sender when None)
            ses_region: Region of the SES identity
        """
        super().__init__(scope, construct_id, **kwargs)

        self.user_pool = cognito.UserPool(
            self,
            'UserPool',
            user_pool_name=user_pool_name,
            # Allow users to sign up themselves
            self_sign_up_enabled=True,
            # Users sign in with email, not username
            sign_in_aliases=cognito.SignInAliases(email=True),
            password_policy=cognito.PasswordPolicy(
                min_length=8,
                require_lowercase=True,
                require_uppercase=True,
                require_digits=True,
                require_symbols=True,
                temp_password_validity=Duration.days(7),
            ),
            account_recovery=cognito.AccountRecovery.EMAIL_ONLY,
            mfa=cognito.Mfa.OFF,
            email=self._email_settings(ses_from_email, ses_region),
        )

        self.user_pool_client = cognito.UserPoolClient(
            self,
            'UserPoolClient',
            user_pool=self.user_pool,
            # Any flow not listed here is rejected by Cognito
            auth_flows=cognito.AuthFlow(
                admin_user_password=True,
                custom=True,
                user_password=True,
                user_srp=True,
            ),
            access_token_validity=Duration.minutes(60),
            id_token_validity=Duration.minutes(60),
            refresh_token_validity=Duration.days(30),
            o_auth=cognito.OAuthSettings(
                flows=cognito.OAuthFlows(authorization_code_grant=True),
                scopes=[
                    cognito.OAuthScope.OPENID,
                    cognito.OAuthScope.EMAIL,
                    cognito.OAuthScope.PROFILE,
                ],
                callback_urls=callback_urls,
            ),
        )

        self.identity_pool = cognito.CfnIdentityPool(
            self,
            'IdentityPool',
            identity_pool_name=identity_pool_name,
            allow_unauthenticated_identities=False,
            cognito_identity_providers=[
                cognito.CfnIdentityPool.CognitoIdentityProviderProperty(
                    client_id=self.user_pool_client.user_pool_client_id,
                    provider_name=self.user_pool.user_pool_provider_name,
                )
            ],
        )

        # Trust only tokens issued for this identity pool to authenticated identities
        self.authenticated_role = iam.Role(
            self,
            'AuthenticatedRole',
            description='Assumed by authenticated identities of the todo lists identity pool',
            assumed_by=iam.FederatedPrincipal(
                IDENTITY_SERVICE,
                conditions={
                    'StringEquals': {
                        f'{IDENTITY_SERVICE}:aud': self.identity_pool.ref,
                    },
                    'ForAnyValue:StringLike': {
                        f'{IDENTITY_SERVICE}:amr': 'authenticated',
                    },
                },
                assume_role_action='sts:AssumeRoleWithWebIdentity',
            ),
        )

        cognito.CfnIdentityPoolRoleAttachment(
            self,
            'IdentityPoolRoleAttachment',
            identity_pool_id=self.identity_pool.ref,
            roles={
                'authenticated': self.authenticated_role.role_arn,
            },
        )

    @staticmethod
    def _email_settings(
        ses_from_email: Optional[str],
        ses_region: Optional[str]
    ) -> cognito.UserPoolEmail:
        """Send Cognito email through SES when a sender is configured."""
        if ses_from_email:
            return cognito.UserPoolEmail.with_ses(
                from_email=ses_from_email,
                ses_region=ses_region,
            )
        return cognito.UserPoolEmail.with_cognito()

    def grant_invoke_api(self, api: apigwv2.HttpApi) -> None:
        """
        Allow authenticated identities to invoke the given HTTP API.

        Args:
            api: HTTP API of this stack
        """
        self.authenticated_role.add_to_policy(
            iam.PolicyStatement(
                effect=iam.Effect.ALLOW,
                actions=['execute-api:Invoke'],
                resources=[api.arn_for_execute_api()],
            )
        )
