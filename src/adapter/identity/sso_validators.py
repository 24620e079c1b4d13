"""
Enterprise SSO credential validation (SAML 2.0 responses, OIDC codes).

Organization sso_config keys:
- saml: idpEntityId (expected Issuer), audience (expected Audience),
  idpCertificate (PEM or bare base64 X.509 signing certificate of the IdP)
- oidc: clientId, clientSecret, tokenEndpoint, userInfoEndpoint, redirectUri
"""

import base64
import binascii
import logging
from datetime import UTC, datetime
from typing import Optional

import httpx
from lxml import etree
from signxml import XMLVerifier
from signxml.exceptions import InvalidInput, InvalidSignature

from libs.result import Error, Result, Return
from src.app.services.identity import ExternalIdentity, ISsoValidator
from src.domain.base import utcnow

logger = logging.getLogger(__name__)

SAML_NS = {
    "saml": "urn:oasis:names:tc:SAML:2.0:assertion",
    "samlp": "urn:oasis:names:tc:SAML:2.0:protocol",
}
SAML_SUCCESS = "urn:oasis:names:tc:SAML:2.0:status:Success"
ASSERTION_TAG = f"{{{SAML_NS['saml']}}}Assertion"
RESPONSE_TAG = f"{{{SAML_NS['samlp']}}}Response"

CLAIMS = "http://schemas.xmlsoap.org/ws/2005/05/identity/claims/"
EMAIL_ATTRIBUTES = ("email", "mail", "emailAddress", CLAIMS + "emailaddress")
FIRST_NAME_ATTRIBUTES = ("firstName", "givenName", CLAIMS + "givenname")
LAST_NAME_ATTRIBUTES = ("lastName", "surname", "sn", CLAIMS + "surname")


def _parse_saml_instant(value: str) -> datetime:
    parsed = datetime.fromisoformat(value.strip())
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(UTC).replace(tzinfo=None)
    return parsed


def _pem_certificate(value: str) -> str:
    if "BEGIN CERTIFICATE" in value:
        return value
    body = "".join(value.split())
    return f"-----BEGIN CERTIFICATE-----\n{body}\n-----END CERTIFICATE-----\n"


class SamlAssertionValidator(ISsoValidator):
    """
    Reads identity out of a signed, base64-encoded SAML response.

    Business Rules:
    - idpEntityId, audience and idpCertificate are all required
      (SSO_NOT_CONFIGURED otherwise)
    - The XML signature (on the Response or on the Assertion) must verify
      against idpCertificate; identity is only read from the signed element
    - Status must be Success, Issuer must equal idpEntityId, Audience must
      contain audience, and NotOnOrAfter must be in the future
    """

    REQUIRED_KEYS = ("idpEntityId", "audience", "idpCertificate")

    async def validate(self, credential: str, sso_config: dict) -> Result[ExternalIdentity]:
        missing = [key for key in self.REQUIRED_KEYS if not sso_config.get(key)]
        if missing:
            logger.error(f"SAML config incomplete, missing: {missing}")
            return Return.err(Error("SSO_NOT_CONFIGURED", "SSO not configured for this domain"))

        invalid = Error("UPSTREAM_AUTH_FAILED", "Invalid SAML response")

        try:
            document = base64.b64decode(credential, validate=False)
            text = document.decode("utf-8")
        except (binascii.Error, ValueError):
            return Return.err(invalid)

        # No DTDs: rules out entity expansion payloads
        if "<!DOCTYPE" in text or "<!ENTITY" in text:
            return Return.err(invalid)

        try:
            verified = XMLVerifier().verify(
                document, x509_cert=_pem_certificate(sso_config["idpCertificate"])
            )
        except (InvalidSignature, InvalidInput, etree.XMLSyntaxError, ValueError) as exc:
            logger.warning(f"SAML signature rejected: {exc!r}")
            return Return.err(invalid)

        signed = verified.signed_xml
        if signed.tag == RESPONSE_TAG:
            status = signed.find("samlp:Status/samlp:StatusCode", SAML_NS)
            if status is None or status.get("Value") != SAML_SUCCESS:
                return Return.err(invalid)
            assertion = signed.find("saml:Assertion", SAML_NS)
        elif signed.tag == ASSERTION_TAG:
            assertion = signed
        else:
            assertion = None
        if assertion is None:
            return Return.err(invalid)

        issuer = assertion.findtext("saml:Issuer", default="", namespaces=SAML_NS)
        if issuer.strip() != sso_config["idpEntityId"]:
            logger.warning(f"SAML issuer mismatch: {issuer!r}")
            return Return.err(invalid)

        try:
            if self._expired(assertion):
                return Return.err(Error("UPSTREAM_AUTH_FAILED", "SAML assertion expired"))
        except ValueError:
            return Return.err(invalid)

        audiences = [
            (a.text or "").strip()
            for a in assertion.iterfind(
                "saml:Conditions/saml:AudienceRestriction/saml:Audience", SAML_NS
            )
        ]
        if sso_config["audience"] not in audiences:
            logger.warning(f"SAML audience mismatch: {audiences}")
            return Return.err(invalid)

        attributes = self._attributes(assertion)
        name_id = (
            assertion.findtext("saml:Subject/saml:NameID", default="", namespaces=SAML_NS)
        ).strip()

        email = self._first(attributes, EMAIL_ATTRIBUTES)
        if not email and "@" in name_id:
            email = name_id

        return Return.ok(
            ExternalIdentity(
                provider_user_id=name_id or email or "",
                email=email,
                first_name=self._first(attributes, FIRST_NAME_ATTRIBUTES),
                last_name=self._first(attributes, LAST_NAME_ATTRIBUTES),
                raw={"nameId": name_id, "attributes": attributes},
            )
        )

    @staticmethod
    def _expired(assertion) -> bool:
        now = utcnow()
        conditions = assertion.find("saml:Conditions", SAML_NS)
        if conditions is not None and conditions.get("NotOnOrAfter"):
            if _parse_saml_instant(conditions.get("NotOnOrAfter")) <= now:
                return True
        for data in assertion.iterfind(
            "saml:Subject/saml:SubjectConfirmation/saml:SubjectConfirmationData", SAML_NS
        ):
            if data.get("NotOnOrAfter") and _parse_saml_instant(data.get("NotOnOrAfter")) <= now:
                return True
        return False

    @staticmethod
    def _attributes(assertion) -> dict:
        attributes = {}
        for attribute in assertion.iterfind("saml:AttributeStatement/saml:Attribute", SAML_NS):
            value = attribute.findtext("saml:AttributeValue", default="", namespaces=SAML_NS)
            if attribute.get("Name") and value.strip():
                attributes[attribute.get("Name")] = value.strip()
        return attributes

    @staticmethod
    def _first(attributes: dict, names) -> Optional[str]:
        for name in names:
            if attributes.get(name):
                return attributes[name]
        return None


class OidcCodeValidator(ISsoValidator):
    """Generic OIDC authorization-code exchange driven by the organization's config"""

    REQUIRED_KEYS = ("clientId", "clientSecret", "tokenEndpoint", "userInfoEndpoint", "redirectUri")

    def __init__(
        self, timeout: float = 10.0, transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.timeout = timeout
        self.transport = transport

    async def validate(self, credential: str, sso_config: dict) -> Result[ExternalIdentity]:
        missing = [key for key in self.REQUIRED_KEYS if not sso_config.get(key)]
        if missing:
            logger.error(f"OIDC config incomplete, missing: {missing}")
            return Return.err(Error("SSO_NOT_CONFIGURED", "SSO not configured for this domain"))

        failed = Error("UPSTREAM_AUTH_FAILED", "Invalid OIDC response")
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                token_response = await client.post(
                    sso_config["tokenEndpoint"],
                    data={
                        "client_id": sso_config["clientId"],
                        "client_secret": sso_config["clientSecret"],
                        "code": credential,
                        "grant_type": "authorization_code",
                        "redirect_uri": sso_config["redirectUri"],
                    },
                    headers={"Accept": "application/json"},
                )
                if token_response.is_error:
                    return Return.err(failed)

                access_token = token_response.json().get("access_token")
                if not access_token:
                    return Return.err(failed)

                user_response = await client.get(
                    sso_config["userInfoEndpoint"],
                    headers={"Authorization": f"Bearer {access_token}"},
                )
                if user_response.is_error:
                    return Return.err(failed)
                data = user_response.json()
                if not isinstance(data, dict):
                    return Return.err(failed)
        except httpx.TransportError as exc:
            logger.warning(f"OIDC provider unreachable: {exc!r}")
            return Return.err(
                Error("UPSTREAM_UNAVAILABLE", "SSO provider is unavailable, try again later")
            )
        except (ValueError, AttributeError):
            return Return.err(failed)

        email = data.get("email")
        return Return.ok(
            ExternalIdentity(
                provider_user_id=str(data.get("sub") or email or ""),
                email=email,
                first_name=data.get("given_name") or data.get("first_name"),
                last_name=data.get("family_name") or data.get("last_name"),
                avatar_url=data.get("picture"),
                raw=data,
            )
        )
