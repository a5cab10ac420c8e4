"""Requisition, account and transaction orchestration."""

import asyncio
import uuid
from datetime import date
from typing import Any, Callable, Dict, List, Optional, Sequence

from nordigen_sync.auth.token_cache import AccessTokenCache, access_token_cache
from nordigen_sync.banks import BankAdapter, resolve
from nordigen_sync.client.exceptions import (
    AccountNotLinkedToRequisition,
    RequisitionNotLinked,
    handle_nordigen_error,
)
from nordigen_sync.config.logging import get_logger
from nordigen_sync.config.settings import settings
from nordigen_sync.models.normalized import NormalizedTransaction
from nordigen_sync.models.requests import CreateRequisitionParams, TransactionQuery
from nordigen_sync.models.responses import (
    BookedAndPending,
    CreatedRequisition,
    Requisition,
    RequisitionWithAccounts,
    TransactionsWithBalance,
)

logger = get_logger(__name__)


class NordigenService:
    """Coordinate Nordigen calls and delegate normalization to bank adapters.

    Every response from the client goes through ``handle_nordigen_error``
    before it is used. Nothing is retried; errors reach the caller as raised.
    """

    def __init__(
        self,
        client,
        token_cache: Optional[AccessTokenCache] = None,
        bank_factory: Callable[[Optional[str]], BankAdapter] = resolve,
    ):
        """Initialize the service.

        Args:
            client: Nordigen client (see ``NordigenClient``)
            token_cache: Access token cache (defaults to the process-wide one)
            bank_factory: Institution id to adapter lookup
        """
        self.client = client
        self.token_cache = token_cache or access_token_cache
        self.bank_factory = bank_factory

        logger.debug("Nordigen service initialized")

    async def _fetch_token(self) -> str:
        token_data = await self.client.generate_token()
        handle_nordigen_error(token_data)
        return token_data["access"]

    async def set_token(self) -> str:
        """Make sure the client carries the process-wide access token."""
        token = await self.token_cache.get_token(self._fetch_token)
        self.client.token = token
        return token

    async def get_requisition(self, requisition_id: str) -> Requisition:
        """Retrieve a requisition by ID.

        Raises:
            NordigenAPIError: For API errors, e.g. ``NotFoundError``
        """
        await self.set_token()

        response = await self.client.requisition.get_by_id(requisition_id)
        handle_nordigen_error(response)

        return Requisition.model_validate(response)

    async def get_linked_requisition(self, requisition_id: str) -> Requisition:
        """Retrieve a requisition and require it to be linked.

        Raises:
            RequisitionNotLinked: If the end user has not completed the consent
            NordigenAPIError: For API errors
        """
        requisition = await self.get_requisition(requisition_id)

        if not requisition.is_linked:
            raise RequisitionNotLinked(requisition_status=requisition.status)

        return requisition

    async def get_requisition_with_accounts(self, requisition_id: str) -> RequisitionWithAccounts:
        """Return a linked requisition with its normalized accounts.

        Each account is extended with the details of its institution. The
        accounts keep the order of the requisition's account list.

        Raises:
            RequisitionNotLinked: If the requisition is not linked
            NordigenAPIError: For API errors
        """
        try:
            requisition = await self.get_linked_requisition(requisition_id)

            detailed_accounts = await asyncio.gather(
                *(self.get_detailed_account(account_id) for account_id in requisition.accounts)
            )

            # One institution call per distinct id, however many accounts share it
            institution_ids = list(dict.fromkeys(
                account.get("institution_id")
                for account in detailed_accounts
                if account.get("institution_id")
            ))
            institutions = await asyncio.gather(
                *(self.get_institution(institution_id) for institution_id in institution_ids)
            )

            extended_accounts = self.extend_accounts_about_institutions(
                detailed_accounts, institutions
            )

            accounts = [
                self.bank_factory(account.get("institution_id")).normalize_account(account)
                for account in extended_accounts
            ]

            logger.info(
                f"Retrieved requisition {requisition_id} with {len(accounts)} accounts "
                f"from {len(institutions)} institutions"
            )
            return RequisitionWithAccounts(requisition=requisition, accounts=accounts)

        except Exception as e:
            logger.error(f"Failed to get requisition with accounts: {e}")
            raise

    async def get_transactions_with_balance(
        self,
        requisition_id: str,
        account_id: str,
        start_date: Optional[date | str] = None,
        end_date: Optional[date | str] = None,
    ) -> TransactionsWithBalance:
        """Return sorted transactions and the reconciled starting balance.

        The starting balance is only exact when the booked transactions span
        the whole period between ``start_date`` and the balance snapshot.

        Raises:
            RequisitionNotLinked: If the requisition is not linked
            AccountNotLinkedToRequisition: If the account is not on the requisition
            ValidationError: If ``end_date`` precedes ``start_date``; checked
                after the linkage guards and before any account call
            MissingBalanceError: If the adapter's current balance is not reported
            NordigenAPIError: For API errors
        """
        try:
            requisition = await self.get_linked_requisition(requisition_id)

            if account_id not in requisition.accounts:
                raise AccountNotLinkedToRequisition(account_id, requisition_id)

            query = TransactionQuery(account_id=account_id, date_from=start_date, date_to=end_date)

            transactions, account_balance = await asyncio.gather(
                self.get_transactions(account_id, query.date_from, query.date_to),
                self.get_balances(account_id),
            )

            bank = self.bank_factory(requisition.institution_id)
            booked_and_pending = transactions.get("transactions") or {}
            sorted_booked = bank.sort_transactions(booked_and_pending.get("booked"))
            sorted_pending = bank.sort_transactions(booked_and_pending.get("pending"))

            balances = account_balance.get("balances") or []
            starting_balance = bank.calculate_starting_balance(sorted_booked, balances)

            logger.info(
                f"Retrieved {len(sorted_booked)} booked and {len(sorted_pending)} pending "
                f"transactions for account {account_id}"
            )
            return TransactionsWithBalance(
                balances=balances,
                institution_id=requisition.institution_id,
                starting_balance=starting_balance,
                transactions=BookedAndPending(
                    booked=list(sorted_booked),
                    pending=list(sorted_pending),
                ),
            )

        except Exception as e:
            logger.error(f"Failed to get transactions with balance: {e}")
            raise

    async def create_requisition(self, params: CreateRequisitionParams) -> CreatedRequisition:
        """Start a consent flow for an institution.

        Args:
            params: Institution, consent duration and redirect host; the
                institution adapter's duration is used when none is given

        Returns:
            Consent link and requisition identifier

        Raises:
            NordigenAPIError: For API errors
        """
        try:
            await self.set_token()

            access_valid_for_days = (
                params.access_valid_for_days
                or self.bank_factory(params.institution_id).access_valid_for_days
            )

            response = await self.client.requisition.create(
                institution_id=params.institution_id,
                reference_id=str(uuid.uuid4()),
                access_valid_for_days=access_valid_for_days,
                redirect_url=params.redirect_host + settings.nordigen_redirect_path,
            )
            handle_nordigen_error(response)

            created = CreatedRequisition(link=response["link"], requisition_id=response["id"])

            logger.info(
                f"Created requisition {created.requisition_id} for {params.institution_id} "
                f"({access_valid_for_days} days)"
            )
            return created

        except Exception as e:
            logger.error(f"Failed to create requisition: {e}")
            raise

    async def delete_requisition(self, requisition_id: str) -> Dict[str, Any]:
        """Delete a requisition after checking that it exists.

        Raises:
            NotFoundError: If the requisition does not exist
            NordigenAPIError: For other API errors
        """
        try:
            await self.get_requisition(requisition_id)

            response = await self.client.requisition.delete(requisition_id)
            handle_nordigen_error(response)

            logger.info(f"Requisition deleted: {requisition_id}")
            return response

        except Exception as e:
            logger.error(f"Failed to delete requisition: {e}")
            raise

    async def get_detailed_account(self, account_id: str) -> Dict[str, Any]:
        """Merge account metadata and account details into one record."""
        await self.set_token()

        account = self.client.account(account_id)
        details, metadata = await asyncio.gather(
            account.get_details(),
            account.get_metadata(),
        )
        handle_nordigen_error(details)
        handle_nordigen_error(metadata)

        return {**metadata, **(details.get("account") or {})}

    async def get_institution(self, institution_id: str) -> Dict[str, Any]:
        """Retrieve details about an institution."""
        await self.set_token()

        response = await self.client.institution.get_by_id(institution_id)
        handle_nordigen_error(response)

        return response

    @staticmethod
    def extend_accounts_about_institutions(
        accounts: Sequence[Dict[str, Any]],
        institutions: Sequence[Dict[str, Any]],
    ) -> List[Dict[str, Any]]:
        """Attach each account's institution details under ``institution``."""
        institutions_by_id = {institution.get("id"): institution for institution in institutions}

        return [
            {**account, "institution": institutions_by_id.get(account.get("institution_id"))}
            for account in accounts
        ]

    async def get_transactions(
        self,
        account_id: str,
        start_date: Optional[date | str] = None,
        end_date: Optional[date | str] = None,
    ) -> Dict[str, Any]:
        """Retrieve raw booked and pending transactions within a date window."""
        query = TransactionQuery(account_id=account_id, date_from=start_date, date_to=end_date)

        await self.set_token()

        response = await self.client.account(account_id).get_transactions(
            **query.to_query_params()
        )
        handle_nordigen_error(response)

        return response

    async def get_balances(self, account_id: str) -> Dict[str, Any]:
        """Retrieve the balance snapshots of an account."""
        await self.set_token()

        response = await self.client.account(account_id).get_balances()
        handle_nordigen_error(response)

        return response

    def normalize_transactions(
        self,
        institution_id: Optional[str],
        transactions: Optional[Sequence[Dict[str, Any]]],
        booked: bool,
    ) -> List[NormalizedTransaction]:
        """Normalize raw transactions with the institution's adapter.

        Dropped transactions are left out; they are expected back on a later
        import and are not an error.
        """
        return self.bank_factory(institution_id).normalize_transactions(transactions, booked)
