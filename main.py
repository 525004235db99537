"""
Solana Dust & Address Poisoning Detection API

This FastAPI application exposes the detection engine: wallet dusting
analysis, single transaction analysis, and a filter that strips dust and
lookalike-address transfers from a wallet's recent history.

MIT License

Copyright (c) 2025 Solana Dust Detection Project

Permission is hereby granted, free of charge, to any person obtaining a copy
of this software and associated documentation files (the "Software"), to deal
in the Software without restriction, including without limitation the rights
to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
copies of the Software, and to permit persons to whom the Software is
furnished to do so, subject to the following conditions:

The above copyright notice and this permission notice shall be included in all
copies or substantial portions of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
SOFTWARE.
"""

import logging
from typing import AsyncIterator, List

import httpx
from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from dust_detector import __version__
from dust_detector.analyzer import analyze_transaction, analyze_wallet, filter_safe_transactions
from dust_detector.config import CORS_ORIGINS, HTTP_TIMEOUT
from dust_detector.models import (
    MultiAddressAnalysisRequest,
    SafeTransactionsResult,
    TransactionAnalysisRequest,
    TransactionAnalysisResult,
    WalletAnalysisResult,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize FastAPI application
app = FastAPI(
    title="Solana Dust & Address Poisoning Detection API",
    description="API for detecting SOL dusting attacks and address poisoning attempts",
    version=__version__,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


async def get_client() -> AsyncIterator[httpx.AsyncClient]:
    """HTTPX client with timeout, closed after the request."""
    async with httpx.AsyncClient(timeout=HTTP_TIMEOUT) as client:
        yield client


# -------------------- API Endpoints --------------------

@app.get("/")
async def root():
    """API root endpoint with basic information."""
    return {
        "name": "Solana Dust & Address Poisoning Detection API",
        "version": __version__,
        "endpoints": [
            "/analyze/wallet/{address}",
            "/analyze/wallets",
            "/analyze/transaction/{signature}",
            "/analyze/transactions",
            "/filter/{address}",
        ],
        "documentation": "/docs",
    }


@app.get("/health")
async def health():
    """Liveness probe."""
    return {"status": "healthy", "version": __version__}


@app.get("/analyze/wallet/{address}", response_model=WalletAnalysisResult)
async def analyze_wallet_endpoint(
    address: str,
    client: httpx.AsyncClient = Depends(get_client),
):
    """Analyze a wallet's recent transactions for dusting."""
    try:
        return await analyze_wallet(address, client)
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))
    except Exception as e:
        logger.error(f"Error analyzing wallet {address}: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to analyze wallet")


@app.post("/analyze/wallets", response_model=List[WalletAnalysisResult])
async def analyze_multiple_wallets(
    request: MultiAddressAnalysisRequest,
    client: httpx.AsyncClient = Depends(get_client),
):
    """Analyze several wallets, one after another."""
    try:
        results = []
        for address in request.addresses:
            results.append(await analyze_wallet(address, client))
        return results
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))
    except Exception as e:
        logger.error(f"Error analyzing multiple wallets: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to analyze wallets")


@app.get("/analyze/transaction/{signature}", response_model=TransactionAnalysisResult)
async def analyze_transaction_endpoint(
    signature: str,
    client: httpx.AsyncClient = Depends(get_client),
):
    """Analyze a single transaction for dusting."""
    try:
        return await analyze_transaction(signature, client)
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))
    except Exception as e:
        logger.error(f"Error analyzing transaction {signature}: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to analyze transaction")


@app.post("/analyze/transactions", response_model=List[TransactionAnalysisResult])
async def analyze_multiple_transactions(
    request: TransactionAnalysisRequest,
    client: httpx.AsyncClient = Depends(get_client),
):
    """Analyze a list of transaction signatures."""
    try:
        results = []
        for signature in request.signatures:
            results.append(await analyze_transaction(signature, client))
        return results
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))
    except Exception as e:
        logger.error(f"Error analyzing transactions: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to analyze transactions")


@app.get("/filter/{address}", response_model=SafeTransactionsResult)
async def filter_transactions_endpoint(
    address: str,
    client: httpx.AsyncClient = Depends(get_client),
):
    """Recent transactions with dust and address poisoning removed."""
    try:
        return await filter_safe_transactions(address, client)
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))
    except Exception as e:
        logger.error(f"Error filtering transactions for {address}: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to analyze transactions")


# Entry point
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
