# utils/chains/data.py
from .types import Chain, ChainConfig, ServiceType
from walletlens.utils.types import ChainIdentifier, ChainFamily, NetworkTier

CHAIN_DATA_MAP = {
    ChainIdentifier.ETHEREUM: Chain(
        id=ChainIdentifier.ETHEREUM,
        family=ChainFamily.EVM,
        env_prefix="ETH",
        config=ChainConfig(
            chain_id=1,
            name="Ethereum",
            native_symbol="ETH",
            native_decimals=18,
            testnet_chain_id=11155111,
            testnet_name="Sepolia",
        ),
        image="https://cryptologos.cc/logos/ethereum-eth-logo.png",
        health_method="eth_blockNumber",
        default_endpoints={
            NetworkTier.MAINNET: "https://eth-mainnet.public.blastapi.io",
            NetworkTier.TESTNET: "https://eth-sepolia.public.blastapi.io",
        },
        aliases={
            ServiceType.ALCHEMY: {
                NetworkTier.MAINNET: "eth-mainnet",
                NetworkTier.TESTNET: "eth-sepolia",
            },
        },
    ),
    ChainIdentifier.POLYGON: Chain(
        id=ChainIdentifier.POLYGON,
        family=ChainFamily.EVM,
        env_prefix="POLYGON",
        config=ChainConfig(
            chain_id=137,
            name="Polygon",
            native_symbol="POL",
            native_decimals=18,
            testnet_chain_id=80002,
            testnet_name="Amoy",
        ),
        image="https://cryptologos.cc/logos/polygon-matic-logo.png",
        health_method="eth_blockNumber",
        default_endpoints={
            NetworkTier.MAINNET: "https://polygon-rpc.com",
            NetworkTier.TESTNET: "https://rpc-amoy.polygon.technology",
        },
        aliases={
            ServiceType.ALCHEMY: {
                NetworkTier.MAINNET: "polygon-mainnet",
                NetworkTier.TESTNET: "polygon-amoy",
            },
        },
    ),
    ChainIdentifier.BSC: Chain(
        id=ChainIdentifier.BSC,
        family=ChainFamily.EVM,
        env_prefix="BSC",
        config=ChainConfig(
            chain_id=56,
            name="BNB Smart Chain",
            native_symbol="BNB",
            native_decimals=18,
            testnet_chain_id=97,
            testnet_name="BSC Testnet",
        ),
        image="https://cryptologos.cc/logos/bnb-bnb-logo.png",
        health_method="eth_blockNumber",
        default_endpoints={
            NetworkTier.MAINNET: "https://bsc-dataseed.bnbchain.org",
            NetworkTier.TESTNET: "https://data-seed-prebsc-1-s1.bnbchain.org:8545",
        },
        aliases={
            ServiceType.ALCHEMY: {
                NetworkTier.MAINNET: "bnb-mainnet",
                NetworkTier.TESTNET: "bnb-testnet",
            },
        },
    ),
    ChainIdentifier.BASE: Chain(
        id=ChainIdentifier.BASE,
        family=ChainFamily.EVM,
        env_prefix="BASE",
        config=ChainConfig(
            chain_id=8453,
            name="Base",
            native_symbol="ETH",
            native_decimals=18,
            testnet_chain_id=84532,
            testnet_name="Base Sepolia",
        ),
        image="https://basescan.org/assets/base/images/svg/logos/chain-light.svg",
        health_method="eth_blockNumber",
        default_endpoints={
            NetworkTier.MAINNET: "https://mainnet.base.org",
            NetworkTier.TESTNET: "https://sepolia.base.org",
        },
        aliases={
            ServiceType.ALCHEMY: {
                NetworkTier.MAINNET: "base-mainnet",
                NetworkTier.TESTNET: "base-sepolia",
            },
        },
    ),
    ChainIdentifier.ARBITRUM: Chain(
        id=ChainIdentifier.ARBITRUM,
        family=ChainFamily.EVM,
        env_prefix="ARB",
        config=ChainConfig(
            chain_id=42161,
            name="Arbitrum One",
            native_symbol="ETH",
            native_decimals=18,
            testnet_chain_id=421614,
            testnet_name="Arbitrum Sepolia",
        ),
        image="https://cryptologos.cc/logos/arbitrum-arb-logo.png",
        health_method="eth_blockNumber",
        default_endpoints={
            NetworkTier.MAINNET: "https://arb1.arbitrum.io/rpc",
            NetworkTier.TESTNET: "https://sepolia-rollup.arbitrum.io/rpc",
        },
        aliases={
            ServiceType.ALCHEMY: {
                NetworkTier.MAINNET: "arb-mainnet",
                NetworkTier.TESTNET: "arb-sepolia",
            },
        },
    ),
    ChainIdentifier.OPTIMISM: Chain(
        id=ChainIdentifier.OPTIMISM,
        family=ChainFamily.EVM,
        env_prefix="OPT",
        config=ChainConfig(
            chain_id=10,
            name="OP Mainnet",
            native_symbol="ETH",
            native_decimals=18,
            testnet_chain_id=11155420,
            testnet_name="OP Sepolia",
        ),
        image="https://cryptologos.cc/logos/optimism-ethereum-op-logo.png",
        health_method="eth_blockNumber",
        default_endpoints={
            NetworkTier.MAINNET: "https://mainnet.optimism.io",
            NetworkTier.TESTNET: "https://sepolia.optimism.io",
        },
        aliases={
            ServiceType.ALCHEMY: {
                NetworkTier.MAINNET: "opt-mainnet",
                NetworkTier.TESTNET: "opt-sepolia",
            },
        },
    ),
    ChainIdentifier.SOLANA: Chain(
        id=ChainIdentifier.SOLANA,
        family=ChainFamily.SOL,
        env_prefix="SOL",
        config=ChainConfig(
            chain_id=101,
            name="Solana",
            native_symbol="SOL",
            native_decimals=9,
            testnet_chain_id=103,
            testnet_name="Solana Devnet",
        ),
        image="https://cryptologos.cc/logos/solana-sol-logo.png",
        health_method="getHealth",
        default_endpoints={
            NetworkTier.MAINNET: "https://api.mainnet-beta.solana.com",
            NetworkTier.TESTNET: "https://api.devnet.solana.com",
        },
        aliases={
            ServiceType.ALCHEMY: {
                NetworkTier.MAINNET: "solana-mainnet",
                NetworkTier.TESTNET: "solana-devnet",
            },
        },
    ),
}
