"""
Cardano Wallet Management

Mnemonic wallet used to pay for, sign and own CIP68 transactions.
Handles address generation, key management and collateral selection.
"""

from typing import Any, Dict, List

import pycardano as pc

from .errors import CollateralNotFoundError


class CardanoWallet:
    """Manages Cardano wallet operations without console dependencies"""

    def __init__(self, wallet_mnemonic: str, network: str = "testnet"):
        """
        Initialize wallet from mnemonic

        Args:
            wallet_mnemonic: BIP39 mnemonic phrase
            network: Network type ("testnet" or "mainnet")
        """
        self.network = network
        self.cardano_network = pc.Network.TESTNET if network == "testnet" else pc.Network.MAINNET

        # Initialize wallet
        self.wallet = pc.crypto.bip32.HDWallet.from_mnemonic(wallet_mnemonic)

        # Derive main keys
        self.payment_key = self.wallet.derive_from_path("m/1852'/1815'/0'/0/0")
        self.staking_key = self.wallet.derive_from_path("m/1852'/1815'/0'/2/0")

        # Get signing keys
        self.payment_skey = pc.ExtendedSigningKey.from_hdwallet(self.payment_key)
        self.staking_skey = pc.ExtendedSigningKey.from_hdwallet(self.staking_key)

        # Create main addresses
        self.enterprise_address = pc.Address(
            payment_part=self.payment_skey.to_verification_key().hash(),
            network=self.cardano_network,
        )

        self.staking_address = pc.Address(
            payment_part=self.payment_skey.to_verification_key().hash(),
            staking_part=self.staking_skey.to_verification_key().hash(),
            network=self.cardano_network,
        )

        # Derived addresses storage
        self.addresses = []

    def generate_addresses(self, count: int) -> List[Dict[str, Any]]:
        """
        Generate multiple addresses for the wallet

        Args:
            count: Number of addresses to generate

        Returns:
            List of generated address information
        """
        generated_addresses = []

        for i in range(len(self.addresses) + 1, len(self.addresses) + count + 1):
            payment_derivation = f"m/1852'/1815'/0'/0/{i}"
            payment_key = self.wallet.derive_from_path(payment_derivation)
            payment_skey = pc.ExtendedSigningKey.from_hdwallet(payment_key)

            addr_info = {
                "index": i,
                "derivation_path": payment_derivation,
                "signing_key": payment_skey,
                "enterprise_address": pc.Address(
                    payment_part=payment_skey.to_verification_key().hash(), network=self.cardano_network
                ),
                "staking_address": pc.Address(
                    payment_part=payment_skey.to_verification_key().hash(),
                    staking_part=self.staking_skey.to_verification_key().hash(),
                    network=self.cardano_network,
                ),
            }

            self.addresses.append(addr_info)
            generated_addresses.append(addr_info)

        return generated_addresses

    def get_payment_verification_key_hash(self) -> bytes:
        """Get the payment verification key hash"""
        return self.payment_skey.to_verification_key().hash().payload

    def get_address(self, index: int = 0, use_staking: bool = False) -> pc.Address:
        """
        Get address by index

        Args:
            index: Address index (0 = main address)
            use_staking: Whether to use staking address

        Returns:
            Cardano address
        """
        if index == 0:
            return self.staking_address if use_staking else self.enterprise_address

        if index > len(self.addresses):
            self.generate_addresses(index - len(self.addresses))

        addr_info = self.addresses[index - 1]
        return addr_info["staking_address"] if use_staking else addr_info["enterprise_address"]

    def get_signing_key(self, index: int = 0) -> pc.ExtendedSigningKey:
        """
        Get signing key by index

        Args:
            index: Address index (0 = main address)

        Returns:
            Extended signing key
        """
        if index == 0:
            return self.payment_skey

        if index > len(self.addresses):
            self.generate_addresses(index - len(self.addresses))

        return self.addresses[index - 1]["signing_key"]

    def sign_transaction(self, tx: pc.Transaction, index: int = 0) -> pc.Transaction:
        """
        Add this wallet's vkey witness to an unsigned transaction

        Args:
            tx: Unsigned transaction returned by the lifecycle operations
            index: Address index whose key signs

        Returns:
            The same transaction with the witness added
        """
        signing_key = self.get_signing_key(index)
        signature = signing_key.sign(tx.transaction_body.hash())
        witness = pc.VerificationKeyWitness(signing_key.to_verification_key(), signature)

        if tx.transaction_witness_set.vkey_witnesses is None:
            tx.transaction_witness_set.vkey_witnesses = []
        tx.transaction_witness_set.vkey_witnesses.append(witness)
        return tx


def select_collateral(utxos: List[pc.UTxO], min_lovelace: int) -> pc.UTxO:
    """
    Pick a pure-ADA UTxO large enough to serve as collateral

    Args:
        utxos: Wallet UTxOs
        min_lovelace: Minimum lovelace the collateral must hold

    Returns:
        Smallest qualifying UTxO

    Raises:
        CollateralNotFoundError: If no UTxO qualifies
    """
    candidates = [
        utxo
        for utxo in utxos
        if not utxo.output.amount.multi_asset and utxo.output.amount.coin >= min_lovelace
    ]
    if not candidates:
        raise CollateralNotFoundError(f"No pure-ADA UTxO with at least {min_lovelace} lovelace for collateral")
    return min(candidates, key=lambda utxo: utxo.output.amount.coin)
